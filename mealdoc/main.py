import uvicorn
from mealdoc.api.api_run import app
from mealdoc.utilities.config import APP_HOST, APP_PORT


if __name__ == "__main__":
    # Point at the export API docs rather than the raw bind address
    print(f"Meal plan document API on http://localhost:{APP_PORT}/docs (Press CTRL+C to quit)")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
