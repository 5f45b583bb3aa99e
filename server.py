# server.py
import uvicorn
from main import config

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8080,
        reload=config.environment != "production",
        log_level=config.logging.level_value.lower(),
    )
