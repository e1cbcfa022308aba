import sys

import uvicorn

from studio_dashboard.core.config import settings


def run_http(port: int = 3000):
    """Run the dashboard gateway"""
    print(f"🚀 Starting dashboard on port {port} (backend {settings.API_URL})...")
    uvicorn.run(
        "studio_dashboard.main:app",
        host="0.0.0.0",
        port=port,
        reload=settings.DEBUG
    )


if __name__ == "__main__":
    # python main.py [port]
    run_http(int(sys.argv[1]) if len(sys.argv) > 1 else 3000)
