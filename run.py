import os

import uvicorn

if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    # Scoring is CPU-bound and sub-millisecond; each worker loads its own
    # read-only copy of the reference tables at startup.
    workers = int(os.environ.get("WEB_CONCURRENCY", 1))
    uvicorn.run(
        "evrisk.main:app",
        host="0.0.0.0",
        port=port,
        workers=workers,
    )
