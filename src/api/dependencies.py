from fastapi import HTTPException, Request, status

from src.domain.connector import CoreConnector


def get_connector(request: Request) -> CoreConnector:
    connector = getattr(request.app.state, "connector", None)
    if connector is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Connector is not initialised")
    return connector
