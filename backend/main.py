"""
PrintDesk - Quotes, inventory and expenses API for a 3D printing business.

The application is assembled by core.app.create_app(); every route lives in
a module under backend/modules/.

    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import uvicorn

from core.app import create_app
from core.config import settings

app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
