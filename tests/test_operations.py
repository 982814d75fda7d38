################################################################################
# File Name: test_operations.py
# Purpose/Description: Tests for the interactive vehicle operations
# Author: Ralph Agent
# Creation Date: 2026-10-14
# Copyright: (c) 2026 Michael Cornelison. All rights reserved.
#
# Modification History:
# ================================================================================
# Date          | Author       | Description
# ================================================================================
# 2026-10-14    | Ralph Agent  | Initial implementation
# ================================================================================
################################################################################

"""
Tests for the compass.cli.operations module.

Run with:
    pytest tests/test_operations.py -v
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import grpc
import pytest

srcPath = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(srcPath))

from common.error_handler import ConfigurationError, ErrorCategory
from compass.api.exceptions import ApiCallError
from compass.cli.operations import VehicleOperations
from compass.settings import ClientSettings
from compass.stream.exceptions import StreamError
from compass.stream.sink import ConsoleMessageSink
from compass.stream.types import StreamOutcome
from compass.vehicle.exceptions import VinValidationError

VIN_A = '1C4RJFAG0FC625797'
VIN_B = '1FTFW1ET5DFC10312'


@pytest.fixture
def apiClient() -> MagicMock:
    return MagicMock()


@pytest.fixture
def output() -> list:
    return []


@pytest.fixture
def operations(apiClient, session, clientSettings, output) -> VehicleOperations:
    return VehicleOperations(apiClient, session, clientSettings, outputFunc=output.append)


# ================================================================================
# One-shot Call Tests
# ================================================================================

class TestOneShotOperations:
    """Tests for the single-call operations."""

    def test_listVehicles_printsCountRecordsAndVins(self, operations, apiClient, session, output):
        """
        Given: Two vehicle records
        When: listVehicles() is called
        Then: Count, each record and its VIN are printed
        """
        records = [SimpleNamespace(vin=VIN_A), SimpleNamespace(vin=VIN_B)]
        apiClient.getVehicles.return_value = records

        result = operations.listVehicles()

        assert result == records
        apiClient.getVehicles.assert_called_once_with(session)
        assert output[0] == 'number of vehicles: 2'
        assert output[2] == f'VIN: {VIN_A}'
        assert output[4] == f'VIN: {VIN_B}'

    def test_onboardVin_usesConsentEmailAndRegion(self, operations, apiClient, session, output):
        """
        Given: Consent email configured
        When: onboardVin() is called
        Then: Sign-up carries the VIN, email and region; email is echoed
        """
        operations.onboardVin(VIN_A)

        apiClient.batchVehicleSignUp.assert_called_once_with(
            session, VIN_A, 'fleet@example.com', 2
        )
        assert output[0] == 'using consent email: fleet@example.com'

    def test_onboardVin_noConsentEmail_raisesBeforeCall(
        self, apiClient, session, sampleConfig, output
    ):
        """
        Given: Empty consent email
        When: onboardVin() is called
        Then: Raises ConfigurationError; no call is made
        """
        sampleConfig['consent']['email'] = ''
        settings = ClientSettings.fromConfig(sampleConfig)
        ops = VehicleOperations(apiClient, session, settings, outputFunc=output.append)

        with pytest.raises(ConfigurationError):
            ops.onboardVin(VIN_A)

        apiClient.batchVehicleSignUp.assert_not_called()

    @pytest.mark.parametrize('method, clientMethod', [
        ('checkConsent', 'checkConsent'),
        ('checkCompatibility', 'checkCompatibility'),
        ('lockVehicle', 'lockVehicle'),
    ])
    def test_vinOperation_invalidVin_noCall(self, operations, apiClient, method, clientMethod):
        """
        Given: Malformed VIN
        When: A VIN operation is called
        Then: Raises VinValidationError; the RPC is never issued
        """
        with pytest.raises(VinValidationError):
            getattr(operations, method)('1C4RJFAG0FC62579O')

        getattr(apiClient, clientMethod).assert_not_called()

    def test_checkConsent_printsResponse(self, operations, apiClient, session, output):
        """
        Given: Consent response
        When: checkConsent() is called
        Then: Response is printed and returned
        """
        apiClient.checkConsent.return_value = 'consent: true'

        assert operations.checkConsent(VIN_A) == 'consent: true'
        apiClient.checkConsent.assert_called_once_with(session, VIN_A)
        assert output == ['consent: true']

    def test_lastReportedPoints_defaultCount_printsEvents(
        self, operations, apiClient, session, output
    ):
        """
        Given: Response with two events
        When: lastReportedPoints() is called without a count
        Then: Configured count (5) is requested; events are printed
        """
        apiClient.getLastReportedPoints.return_value = SimpleNamespace(events=['e0', 'e1'])

        operations.lastReportedPoints(VIN_A)

        apiClient.getLastReportedPoints.assert_called_once_with(session, VIN_A, 5)
        assert output == ['number of events: 2', '0 e0', '1 e1']

    def test_lockVehicle_printsLocked(self, operations, apiClient, output):
        """
        Given: Valid VIN
        When: lockVehicle() is called
        Then: 'locked' is printed
        """
        operations.lockVehicle(VIN_A)

        assert output == ['locked']

    def test_apiFailure_propagates(self, operations, apiClient, makeRpcError):
        """
        Given: CheckCompatibility fails
        When: checkCompatibility() is called
        Then: The ApiCallError propagates to the caller
        """
        apiClient.checkCompatibility.side_effect = ApiCallError(
            'CheckCompatibility', makeRpcError(grpc.StatusCode.NOT_FOUND)
        )

        with pytest.raises(ApiCallError):
            operations.checkCompatibility(VIN_A)


# ================================================================================
# Remove Tests
# ================================================================================

class TestRemoveVehicles:
    """Tests for removeVehicles()."""

    def test_removeVehicles_oneCallPerVin(self, operations, apiClient, session, output):
        """
        Given: Two valid VINs
        When: removeVehicles() is called
        Then: One remove call per VIN; nothing collected
        """
        collector = operations.removeVehicles([VIN_A, VIN_B])

        assert [c.args for c in apiClient.removeVehicle.call_args_list] == [
            (session, VIN_A), (session, VIN_B)
        ]
        assert collector.hasErrors() is False
        assert output.count('removed') == 2

    def test_removeVehicles_failuresCollected_continues(
        self, operations, apiClient, makeRpcError, caplog
    ):
        """
        Given: One malformed VIN and one VIN whose removal fails
        When: removeVehicles() is called with a third good VIN
        Then: Both failures are collected with their VIN; the good VIN is removed
        """
        apiClient.removeVehicle.side_effect = [
            ApiCallError('RemoveVehicle', makeRpcError(grpc.StatusCode.NOT_FOUND)),
            'ok',
        ]

        collector = operations.removeVehicles(['BAD', VIN_A, VIN_B])

        assert collector.count() == 2
        assert [e['context']['vin'] for e in collector.errors] == ['BAD', VIN_A]
        assert apiClient.removeVehicle.call_count == 2
        assert 'Collected 2 errors:' in caplog.text


# ================================================================================
# Realtime Stream Tests
# ================================================================================

class TestStreamRealtime:
    """Tests for streamRealtime()."""

    def test_streamRealtime_cleanEnd_printsAndReturnsOutcome(
        self, apiClient, session, clientSettings, output
    ):
        """
        Given: Supervisor whose single attempt ends cleanly
        When: streamRealtime() is called
        Then: Console sink and single-VIN batch are used; 'Stream ended.' printed
        """
        supervisor = MagicMock()
        supervisor.runOnce.return_value = StreamOutcome.gracefulEnd(3)
        factory = MagicMock(return_value=supervisor)
        ops = VehicleOperations(
            apiClient, session, clientSettings,
            outputFunc=output.append, supervisorFactory=factory
        )

        outcome = ops.streamRealtime(VIN_A)

        assert outcome.recordCount == 3
        sink = factory.call_args.args[3]
        assert isinstance(sink, ConsoleMessageSink)
        assert list(supervisor.runOnce.call_args.args[0]) == [VIN_A]
        assert output == ['Receiving stream messages:', 'Stream ended.']

    def test_streamRealtime_failure_raisesStreamError(
        self, apiClient, session, clientSettings, output, makeRpcError
    ):
        """
        Given: Supervisor whose single attempt fails with UNAVAILABLE
        When: streamRealtime() is called
        Then: Raises StreamError carrying the cause and category
        """
        cause = makeRpcError(grpc.StatusCode.UNAVAILABLE, 'reset')
        supervisor = MagicMock()
        supervisor.runOnce.return_value = StreamOutcome.failure(
            cause, ErrorCategory.RETRYABLE, recordCount=1
        )
        ops = VehicleOperations(
            apiClient, session, clientSettings,
            outputFunc=output.append, supervisorFactory=MagicMock(return_value=supervisor)
        )

        with pytest.raises(StreamError) as excInfo:
            ops.streamRealtime(VIN_A)

        assert excInfo.value.cause is cause
        assert excInfo.value.category == ErrorCategory.RETRYABLE
        assert excInfo.value.details == {'vin': VIN_A, 'records': 1}

    def test_streamRealtime_defaultFactory_printsRecords(
        self, operations, apiClient, output, makeStreamCall
    ):
        """
        Given: Real supervisor over a stream with two records
        When: streamRealtime() is called
        Then: Records are printed between the banner and the end line
        """
        apiClient.openRealtimeStream.return_value = makeStreamCall(['rec-1', 'rec-2'])

        operations.streamRealtime(VIN_A)

        assert output == ['Receiving stream messages:', 'rec-1', 'rec-2', 'Stream ended.']
        apiClient.openRealtimeStream.assert_called_once()
