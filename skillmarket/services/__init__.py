# skillmarket/services/__init__.py
# Business logic sits between the API routers and the CRUD/store layer.
