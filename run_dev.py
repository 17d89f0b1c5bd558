# run_dev.py
"""
Local development launcher for FastAPI.
Equivalent to: `uvicorn everlast_chat.app:app --reload --host 0.0.0.0 --port 8000 --app-dir src`
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "everlast_chat.app:app",
        app_dir="src",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
