import uvicorn

from paygate.app import create_app
from paygate.core.config import settings

# --- 1. L'APPLICATION ---
# Tables créées, CORS et routes branchés dans create_app()
app = create_app()

# --- 2. LANCEMENT DU SERVEUR ---
if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)
