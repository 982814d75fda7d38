################################################################################
# File Name: client.py
# Purpose/Description: gRPC channel and call wrapper for the Compass API
# Author: Michael Cornelison
# Creation Date: 2026-10-12
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-12    | M. Cornelison | Initial implementation
# 2026-10-14    | M. Cornelison | Realtime stream call, lock and remove
# ================================================================================
################################################################################

"""
Compass API client module.

Provides:
- TLS gRPC channel management to the Compass (NativeConnect) service
- Request message construction for every Compass RPC the client uses
- Bearer-credential metadata attached to every authenticated call

The generated protobuf/gRPC modules are published outside PyPI, so they are
imported by module path from settings (api.messagesModule/api.servicesModule).
Tests inject a stub and a messages namespace directly.

Usage:
    from compass.api.client import CompassApiClient

    client = CompassApiClient(settings)
    client.connect()
    token = client.authenticate(settings.apiKey)
    ...
    client.close()
"""

import importlib
import logging
from collections.abc import Callable, Iterator
from types import ModuleType
from typing import Any

import grpc
from google.protobuf import empty_pb2

from compass.session.types import Session
from compass.settings import ClientSettings
from compass.stream.types import StreamRequest

from .exceptions import ApiCallError, ApiNotAvailableError, ApiNotConnectedError

logger = logging.getLogger(__name__)


# ================================================================================
# Constants
# ================================================================================

STUB_CLASS_NAME = 'ServiceStub'

# Keepalive keeps long-lived server streams from being dropped by idle proxies
DEFAULT_CHANNEL_OPTIONS = [
    ('grpc.keepalive_time_ms', 20000),
    ('grpc.keepalive_timeout_ms', 5000),
    ('grpc.keepalive_permit_without_calls', 1),
]


def createSecureChannel(target: str) -> grpc.Channel:
    """
    Open a TLS channel using the system root certificates.

    Args:
        target: gRPC target, e.g. 'dns:///nativeconnect.cloud:443'

    Returns:
        grpc.Channel
    """
    credentials = grpc.ssl_channel_credentials()
    return grpc.secure_channel(target, credentials, options=DEFAULT_CHANNEL_OPTIONS)


def importApiModule(modulePath: str) -> ModuleType:
    """
    Import a generated Compass API module.

    Args:
        modulePath: Dotted module path

    Returns:
        Imported module

    Raises:
        ApiNotAvailableError: If the module cannot be imported
    """
    try:
        return importlib.import_module(modulePath)
    except ImportError as e:
        raise ApiNotAvailableError(
            f"Compass API module '{modulePath}' is not installed",
            details={'module': modulePath, 'error': str(e)}
        ) from e


class CompassApiClient:
    """
    Thin wrapper around the generated Compass gRPC stub.

    Every method maps to one RPC. Authenticated methods take the Session and
    pass its metadata; nothing about the credential is stored on the client.

    Attributes:
        settings: Client settings
        stub: Generated ServiceStub (set by connect() or injected)
        messages: Generated messages module (set by connect() or injected)
    """

    def __init__(
        self,
        settings: ClientSettings,
        stub: Any | None = None,
        messages: Any | None = None,
        channelFactory: Callable[[str], Any] | None = None
    ):
        """
        Initialize the API client.

        Args:
            settings: Client settings
            stub: Optional pre-built stub (for testing)
            messages: Optional messages namespace (for testing)
            channelFactory: Optional factory creating the channel from a target
        """
        self.settings = settings
        self.stub = stub
        self.messages = messages
        self._channelFactory = channelFactory or createSecureChannel
        self._channel: Any | None = None

    @property
    def isConnected(self) -> bool:
        """Check whether a stub is available."""
        return self.stub is not None

    def connect(self) -> None:
        """
        Open the channel and build the stub.

        Raises:
            ApiNotAvailableError: If the generated modules are missing
        """
        if self.messages is None:
            self.messages = importApiModule(self.settings.messagesModule)

        if self.stub is not None:
            return

        services = importApiModule(self.settings.servicesModule)
        stubClass = getattr(services, STUB_CLASS_NAME, None)
        if stubClass is None:
            raise ApiNotAvailableError(
                f"{self.settings.servicesModule} has no {STUB_CLASS_NAME}",
                details={'module': self.settings.servicesModule}
            )

        logger.info(f"Connecting to Compass API | target={self.settings.target}")
        self._channel = self._channelFactory(self.settings.target)
        self.stub = stubClass(self._channel)

    def close(self) -> None:
        """Close the channel if this client opened it."""
        if self._channel is not None:
            try:
                logger.info("Closing Compass API channel")
                self._channel.close()
            except Exception as e:
                logger.warning(f"Error closing channel: {e}")
            finally:
                self._channel = None
                self.stub = None

    def __enter__(self) -> 'CompassApiClient':
        self.connect()
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # ================================================================================
    # RPCs
    # ================================================================================

    def authenticate(self, apiKey: str) -> str:
        """
        Exchange the API key for an access token.

        Args:
            apiKey: Static Compass API key

        Returns:
            Access token (may be empty if the server sent none)

        Raises:
            ApiCallError: If the RPC fails
        """
        request = self._msg().AuthenticateRequest(token=apiKey)
        response = self._call('Authenticate', request)
        return getattr(response, 'access_token', '') or ''

    def getVehicles(self, session: Session) -> list[Any]:
        """
        List vehicles known to Compass.

        Returns:
            Provider-tagged vehicle records
        """
        response = self._call('GetVehicles', empty_pb2.Empty(), session)
        return list(getattr(response, 'provider_get', None) or [])

    def batchVehicleSignUp(
        self,
        session: Session,
        vin: str,
        consentEmail: str,
        region: int
    ) -> Any:
        """Onboard a VIN with the operator's consent email."""
        msg = self._msg()
        consent = msg.Consent(
            provider_auth=msg.AuthRequest(vin=msg.VinAuth(vin=vin)),
            region=region,
        )
        request = msg.BatchVehicleSignUpRequest(consent_email=consentEmail, consent=[consent])
        return self._call('BatchVehicleSignUp', request, session, vin=vin)

    def checkConsent(self, session: Session, vin: str) -> Any:
        request = self._msg().CheckConsentRequest(vin=vin)
        return self._call('CheckConsent', request, session, vin=vin)

    def checkCompatibility(self, session: Session, vin: str) -> Any:
        request = self._msg().CheckCompatibilityRequest(vin=vin)
        return self._call('CheckCompatibility', request, session, vin=vin)

    def getLastReportedPoints(self, session: Session, vin: str, points: int) -> Any:
        request = self._msg().GetLastReportedPointsRequest(vin=vin, points=points)
        return self._call('GetLastReportedPoints', request, session, vin=vin)

    def lockVehicle(self, session: Session, vin: str) -> Any:
        # Lock may not work in NA yet, but works in other regions
        msg = self._msg()
        request = msg.IssueActionRequest(vin=vin, lock=msg.SetLockCommand(locked=True))
        return self._call('IssueAction', request, session, vin=vin)

    def removeVehicle(self, session: Session, vin: str) -> Any:
        request = self._msg().RemoveVehicleRequest(vins=[vin])
        return self._call('RemoveVehicle', request, session, vin=vin)

    def openRealtimeStream(
        self,
        session: Session,
        request: StreamRequest,
        timeoutSeconds: float
    ) -> Iterator[Any]:
        """
        Open the realtime raw-point stream for a VIN batch.

        The timeout is a deadline for the whole call, not per message.
        RpcErrors are not wrapped; the stream supervisor classifies them.

        Args:
            session: Authenticated session
            request: VIN batch and staleness bound
            timeoutSeconds: Deadline for the whole stream

        Returns:
            Call object, iterable over telemetry records and cancellable
        """
        message = self._msg().RealtimeRawPointByVinsRequest(
            vins=list(request.vins),
            max_staleness_minutes=request.maxStalenessMinutes,
        )
        return self._requireStub().RealtimeRawPointByVins(
            message,
            metadata=session.metadata,
            timeout=timeoutSeconds,
        )

    # ================================================================================
    # Internals
    # ================================================================================

    def _requireStub(self) -> Any:
        if self.stub is None:
            raise ApiNotConnectedError("Compass API client is not connected")
        return self.stub

    def _msg(self) -> Any:
        if self.messages is None:
            raise ApiNotConnectedError("Compass API messages are not loaded")
        return self.messages

    def _call(
        self,
        operation: str,
        request: Any,
        session: Session | None = None,
        **context: Any
    ) -> Any:
        """
        Invoke a unary RPC with the session credential and request deadline.

        Raises:
            ApiCallError: Wrapping any RpcError from the call
        """
        method = getattr(self._requireStub(), operation)
        kwargs: dict[str, Any] = {'timeout': self.settings.requestTimeoutSeconds}
        if session is not None:
            kwargs['metadata'] = session.metadata

        logger.debug(f"Calling {operation}")
        try:
            return method(request, **kwargs)
        except grpc.RpcError as e:
            raise ApiCallError(operation, e, details=context or None) from e
