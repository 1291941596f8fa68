from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import HOST, PORT, configure_logging
from .routers import analyze

configure_logging()

app = FastAPI(title="Circulation Circularity Engine", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analyze.router)


@app.get("/")
def read_root():
    return {"status": "ok", "message": "Circulation circularity engine is running"}


@app.get("/report.json")
async def download_report():
    """Returns the last monthly circularity report as a download."""
    report = analyze.last_report["report"]
    if report is None:
        raise HTTPException(status_code=404, detail="No report available. POST /circularity/monthly first.")
    return JSONResponse(
        content=report.model_dump(mode="json", by_alias=True),
        headers={"Content-Disposition": "attachment; filename=circularity_report.json"},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
