"""
Storefront — E-commerce REST Backend (v1.0.0)

Architecture:
  storefront/
  ├── config/    — Environment, constants, roles, order statuses
  ├── db/        — Document store (JSON file or PostgreSQL), photo storage
  ├── auth/      — bcrypt hashing, JWT, sign-in / admin guards
  ├── accounts/  — Register, login, forgot password, profile, user list
  ├── catalog/   — Categories and slugs
  ├── products/  — Product CRUD, photos, filters, search, pagination
  ├── orders/    — Order creation, listing, status workflow
  ├── payments/  — Payment gateway interface + sandbox gateway, checkout
  ├── seed/      — Optional demo data
  └── server.py  — FastAPI routing layer (/api/v1/...)

Each module is self-contained with clear imports and no circular dependencies.
"""
