"""
auth — User authentication module.

Provides:
  • Signed bearer token issuance & verification (``TokenSigner``)
  • Password hashing (bcrypt)
  • Register / Authenticate / Me API routes
  • Error taxonomy mapped to HTTP statuses
"""
