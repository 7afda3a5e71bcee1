"""
Vaev Application Package

Directory Structure:
├── routers/           # FastAPI route handlers (pages, auth, SSE streams, v-api)
├── schemas/           # Pydantic models for API requests/responses
│   └── api_schemas.py # HTTP request/response structures
├── application/       # Services: ownership checks, project bootstrap, graph mutations
├── security/          # Signed cookie codec, session/CSRF and identity middleware, guards
├── services/          # Identity provider (passwords and auth tokens)
├── db/                # SQLAlchemy models, engine and repositories
├── templates/         # Jinja2 pages and SSE fragments
└── config.py          # Application configuration

Model Types Clarification:
1. **API Schemas** (vaev.schemas.api_schemas): Pydantic models for HTTP requests/responses
2. **Database Models** (vaev.db.models): SQLAlchemy tables for users, projects and graphs

Client-side temp ids live only in the API schemas; they are never stored.
"""
