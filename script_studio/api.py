from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from loguru import logger

app = FastAPI(
    title="Script Studio API",
    description="Local stand-ins for the topic submission and script endpoints",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

SAMPLE_SCRIPT = {
    "script": (
        "Welcome to our video on how to bake a cake! First, gather ingredients:\n"
        "- 2 cups of flour\n"
        "- 1 cup of sugar\n"
        "- 3 eggs\n"
        "- 1 cup of milk\n"
        "- 1/2 cup of butter\n"
        "\n"
        "Let's start by preheating the oven to 350°F (175°C). While that's heating up, "
        "we'll mix our dry ingredients together."
    ),
    "mediaNotes": [
        "Show close-up of measuring cups",
        "Display oven temperature setting",
        "Show mixing bowl with dry ingredients",
        "Include text overlay with ingredient measurements",
    ],
}

async def _acknowledge(request: Request, label: str, success_message: str, failure_message: str):
    try:
        body = await request.json()
    except ValueError as e:
        logger.error(f"Error in {label}: {e}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": failure_message},
        )

    logger.info(f"Received {label}: {body}")
    return {"success": True, "message": success_message}

@app.post("/api/submitTopic")
async def submit_topic(request: Request):
    """Acknowledge a topic submission."""
    return await _acknowledge(
        request, "topic submission", "Topic submitted successfully", "Failed to submit topic"
    )

@app.post("/api/approveScript")
async def approve_script(request: Request):
    """Acknowledge a script approval."""
    return await _acknowledge(
        request, "script approval", "Script approved successfully", "Failed to approve script"
    )

@app.get("/api/getScript")
async def get_script():
    """Return a static sample script."""
    return SAMPLE_SCRIPT

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
