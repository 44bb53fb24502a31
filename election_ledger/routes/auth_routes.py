from fastapi import APIRouter, Form, HTTPException, Request

from election_ledger import crud
from election_ledger.errors import StorageError
from election_ledger.routes.common import to_http_exception
from election_ledger.schemas import AccountCreate, AccountOut, Token
from election_ledger.security import create_access_token

auth_router = APIRouter(prefix="/auth", tags=["Auth"])


@auth_router.post("/register", response_model=AccountOut, status_code=201)
def register(account: AccountCreate, request: Request):
    try:
        identity, error = crud.register_account(request.app.state.store, account.identity, account.password)
    except StorageError as e:
        raise to_http_exception(e)
    if error:
        raise HTTPException(status_code=400, detail=error)
    return AccountOut(identity=identity)


@auth_router.post("/login", response_model=Token)
def login(request: Request, identity: str = Form(...), password: str = Form(...)):
    try:
        identity, error = crud.authenticate(request.app.state.store, identity, password)
    except StorageError as e:
        raise to_http_exception(e)
    if error:
        raise HTTPException(status_code=401, detail=error)
    return Token(access_token=create_access_token({"sub": identity}))
