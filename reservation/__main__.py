"""Run the estimate API: python -m reservation"""

import uvicorn

from .config import settings


def main():
    uvicorn.run("reservation.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
