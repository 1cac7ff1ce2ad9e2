"""
Lancement local de l'API (en production, Vercel sert `api.index:app`).
"""
import os

from api.index import app  # noqa: F401

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.index:app", host="0.0.0.0", port=int(os.getenv("PORT", "8001")), reload=True)
