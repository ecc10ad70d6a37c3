"""
auth — User authentication module.

Provides:
  • Session token issuing & verification (JWT, HS256)
  • Password hashing (bcrypt, work factor 12)
  • Register / Login API routes
  • ``get_current_user_id`` FastAPI dependency
"""
