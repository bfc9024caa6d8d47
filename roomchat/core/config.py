# roomchat/core/config.py
import os
from typing import List

from dotenv import load_dotenv


class Settings:
    """
    Setup environment variables.
        - HOST / PORT the address uvicorn binds to (PORT defaults to 3000)
        - LOG_LEVEL the root logger level
        - DEFAULT_ROOM the room every fresh directory starts with
        - STATIC_DIR optional directory of client assets served at "/"
        - CORS_ORIGINS comma separated list of allowed origins
    """

    def __init__(self) -> None:
        # Load environment variables from the .env file
        load_dotenv()

        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "3000"))
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

        self.DEFAULT_ROOM: str = os.getenv("DEFAULT_ROOM", "general")
        self.STATIC_DIR: str = os.getenv("STATIC_DIR", "")

        self.CORS_ORIGINS: List[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]


settings = Settings()
