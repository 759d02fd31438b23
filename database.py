import logging

import firebase_admin
from firebase_admin import credentials, firestore_async
from core.config import settings

logger = logging.getLogger(__name__)


class Database:
    """
    Тримає async-клієнт Firestore. Відкривається в lifespan застосунку
    і закривається там же, сервіси отримують клієнт через конструктор.
    """

    _db = None

    @classmethod
    def initialize(cls):
        if cls._db is not None:
            return cls._db

        if not firebase_admin._apps:
            options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
            if settings.FIREBASE_SERVICE_ACCOUNT_KEY_PATH:
                cred = credentials.Certificate(settings.FIREBASE_SERVICE_ACCOUNT_KEY_PATH)
            else:
                cred = credentials.ApplicationDefault()
            firebase_admin.initialize_app(cred, options)

        cls._db = firestore_async.client()
        logger.info("Finance Service Database Connected (project=%s)", cls._db.project)
        return cls._db

    @classmethod
    def get_db(cls):
        if cls._db is None:
            cls.initialize()
        return cls._db

    @classmethod
    def is_connected(cls) -> bool:
        return cls._db is not None

    @classmethod
    def close(cls):
        if cls._db is not None:
            cls._db = None
            logger.info("Finance Service Database connection closed")
