from fastapi.responses import JSONResponse


def error_response(status_code: int, message: str) -> JSONResponse:
    """Corpo de erro no formato {"error": "..."} usado pelo frontend."""
    return JSONResponse(status_code=status_code, content={"error": message})
