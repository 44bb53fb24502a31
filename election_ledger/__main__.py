import uvicorn

from election_ledger import config

if __name__ == "__main__":
    uvicorn.run("election_ledger.main:app", host=config.HOST, port=config.PORT)
