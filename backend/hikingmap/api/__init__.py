"""API router subpackage for the Hiking Map backend.

Each module exposes its own APIRouter for composition in the application's
main FastAPI instance.

Submodules:
    - cookies: Set, read, check and expire the demo cookie.
    - sessions: Set, read, check and clear the demo session value.
    - trails: Convert trails between GeoJSON, CSV, GPX and Shapefile.
    - schemas: Request bodies shared by the routers.
    - dependencies: Settings injection for request handlers.
"""
