"""
Services layer - Business logic goes here.

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Services raise app.core.errors types; routes never translate them
- Each service has a get_*_service() singleton accessor
"""
