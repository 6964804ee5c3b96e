"""`python -m codenames` — run the API with uvicorn on settings.HOST/PORT."""
import uvicorn

from codenames.config.settings import settings

if __name__ == "__main__":
    uvicorn.run("codenames.main:app", host=settings.HOST, port=settings.PORT)
