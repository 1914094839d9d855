"""Run the API server: python -m app"""

import uvicorn

from workflow_graph.config import API_HOST, API_PORT

if __name__ == "__main__":
    uvicorn.run("app.main:app", host=API_HOST, port=API_PORT)
