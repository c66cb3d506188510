import logging
from contextlib import contextmanager

from fastapi import HTTPException, status
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from cms.domains.content.errors import (
    BulkSaveError, CollectionNotEmptyError, DuplicateItemError, InvalidPayloadError,
    InvalidPermutationError, ItemNotFoundError, SlugConflictError, StoreError, UnknownContentError,
)

logger = logging.getLogger(__name__)


@contextmanager
def content_errors(failure_message: str):
    """Перевод ошибок домена контента в HTTP ответы"""
    try:
        yield
    except UnknownContentError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=jsonable_encoder(e.errors(include_url=False, include_context=False)),
        )
    except (InvalidPayloadError, InvalidPermutationError, DuplicateItemError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (CollectionNotEmptyError, SlugConflictError) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except (StoreError, BulkSaveError):
        logger.error(failure_message, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=failure_message)
