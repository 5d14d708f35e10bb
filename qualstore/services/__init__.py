"""Services Layer — project registry that owns one store per project.

Invariants:
    - Stores are reached only through the registry handed out by the app
    - No module-level store instances

Design Decisions:
    - Registry lives on app.state, created by create_app() (explicit handle, no ambient singleton)
"""
