"""
Utility routes (health)
"""
import time

from txproof import __version__


def register_utility_routes(app):
    """Register utility routes on the FastAPI app"""

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "version": __version__, "timestamp": time.time()}
