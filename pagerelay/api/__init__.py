"""FastAPI HTTP layer package.

Callers build the application explicitly::

    from pagerelay.api import create_app

    app = create_app()

or point uvicorn at the factory::

    uvicorn pagerelay.api:create_app --factory
"""

from pagerelay.api.app import create_app

__all__ = ["create_app"]
