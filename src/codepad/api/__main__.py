import uvicorn

from .main import app, config

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=config.port)
