from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from .routes import router
from .core import mongo_startup, mongo_shutdown, get_database, CORS_ORIGINS, PORT
from .directory import MongoUserDirectory
from .errors import PostError
from .store import MongoPostStore
import logging
from pythonjsonlogger import jsonlogger

# setup structured logging
logger = logging.getLogger('postfeed')
handler = logging.StreamHandler()
formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(logging.INFO)

app = FastAPI(title="PostFeed API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.include_router(router, prefix="/api")

@app.get('/healthz')
async def healthz():
    return {'status': 'ok'}

@app.exception_handler(PostError)
async def post_error_handler(request: Request, exc: PostError):
    return JSONResponse(status_code=exc.status_code, content={'msg': exc.message})

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = err.get('loc') or ()
        errors.append({
            # a missing field has no submitted value
            'value': None if err.get('type') == 'missing' else err.get('input'),
            'msg': err.get('msg'),
            'param': str(loc[-1]) if loc else None,
            'location': str(loc[0]) if loc else None,
        })
    return JSONResponse(status_code=400, content=jsonable_encoder({'errors': errors}))

@app.middleware('http')
async def log_requests(request: Request, call_next):
    logger.info({'msg':'request_start','method':request.method,'path':request.url.path})
    try:
        response = await call_next(request)
    except Exception:
        logger.exception({'msg':'request_failed','method':request.method,'path':request.url.path})
        return PlainTextResponse('Server Error', status_code=500)
    logger.info({'msg':'request_end','status': response.status_code})
    return response

@app.on_event("startup")
async def startup():
    # Best-effort init, don't block app from starting if mongo is down
    try:
        await mongo_startup()
    except Exception as e:
        logger.warning({'msg': 'mongo_init_failed', 'error': str(e)})
    db = get_database()
    if db is not None:
        app.state.post_store = MongoPostStore(db.posts)
        app.state.user_directory = MongoUserDirectory(db.users)

@app.on_event("shutdown")
async def shutdown():
    await mongo_shutdown()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
