from fastapi.responses import JSONResponse


def ok(data=None, meta=None, status: int = 200):
    return JSONResponse(
        status_code=status,
        content={
            "ok": True,
            "data": data,
            "meta": meta or {},
        },
    )


def error(message: str, code: str = "error", status: int = 400, data=None):
    content = {
        "ok": False,
        "error": code,
        "message": message,
    }
    if data is not None:
        content["data"] = data
    return JSONResponse(status_code=status, content=content)
