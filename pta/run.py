import uvicorn
from pta import create_app
from pta.core.config import settings

# Create the FastAPI app using the create_app function
app = create_app()


if __name__ == "__main__":
    uvicorn.run("pta.run:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
