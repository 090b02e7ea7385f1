"""
API subsystem.

Components:
- app.py: FastAPI app factory + error boundary
- auth.py: password hashing, signed session token, cookie helpers
- auth_routes.py: login / register / logout / current user
- task_routes.py: task CRUD scoped to the authenticated user
"""
