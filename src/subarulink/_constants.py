"""Internal constants shared across the library.

Endpoint paths containing ``api_gen`` are templates; the segment is
replaced with ``g1`` or ``g2`` for the target vehicle at call time.
"""

API_VERSION = "/g2v30"
API_GEN_PLACEHOLDER = "api_gen"

API_SERVER: dict[str, str] = {
    "USA": "mobileapi.prod.subarucs.com",
    "CAN": "mobileapi.ca.prod.subarucs.com",
}
API_MOBILE_APP: dict[str, str] = {
    "USA": "com.subaru.telematics.app.remote",
    "CAN": "ca.subaru.telematics.remote",
}
USER_AGENT = (
    "Mozilla/5.0 (Linux; Android 10; Android SDK built for x86 Build/QSR1.191030.002; wv) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Version/4.0 Chrome/74.0.3729.185 Mobile Safari/537.36"
)

# ------------------------------------------------------------------
# Account / session endpoints
# ------------------------------------------------------------------

API_LOGIN = "/login.json"
API_2FA_CONTACT = "/twoStepAuthContacts.json"
API_2FA_SEND_VERIFICATION = "/twoStepAuthSendVerification.json"
API_2FA_AUTH_VERIFY = "/twoStepAuthVerify.json"
API_SELECT_VEHICLE = "/selectVehicle.json"
API_VALIDATE_SESSION = "/validateSession.json"
API_VEHICLE_STATUS = "/vehicleStatus.json"
API_VEHICLE_HEALTH = "/vehicleHealth.json"

# ------------------------------------------------------------------
# Remote service endpoints (templates)
# ------------------------------------------------------------------

API_LOCK = "/service/api_gen/lock/execute.json"
API_UNLOCK = "/service/api_gen/unlock/execute.json"
API_HORN_LIGHTS = "/service/api_gen/hornLights/execute.json"
API_HORN_LIGHTS_STOP = "/service/api_gen/hornLights/stop.json"
API_LIGHTS = "/service/api_gen/lightsOnly/execute.json"
API_LIGHTS_STOP = "/service/api_gen/lightsOnly/stop.json"
API_CONDITION = "/service/api_gen/condition/execute.json"
API_LOCATE = "/service/api_gen/locate/execute.json"
API_REMOTE_SVC_STATUS = "/service/api_gen/remoteService/status.json"

API_G1_LOCATE_UPDATE = "/service/g1/vehicleLocate/execute.json"
API_G1_LOCATE_STATUS = "/service/g1/vehicleLocate/status.json"
API_G2_LOCATE_UPDATE = "/service/g2/vehicleStatus/execute.json"
API_G2_LOCATE_STATUS = "/service/g2/vehicleStatus/locationStatus.json"
API_G1_HORN_LIGHTS_STATUS = "/service/g1/hornLights/status.json"

API_G2_REMOTE_ENGINE_START = "/service/g2/engineStart/execute.json"
API_G2_REMOTE_ENGINE_STOP = "/service/g2/engineStop/execute.json"
API_G2_FETCH_RES_USER_PRESETS = "/service/g2/remoteEngineStartSettings/fetch.json"
API_G2_FETCH_RES_SUBARU_PRESETS = "/service/g2/climatePresetSettings/fetch.json"
API_G2_SAVE_RES_SETTINGS = "/service/g2/remoteEngineStartSettings/save.json"
API_G2_SAVE_RES_QUICK_START_SETTINGS = "/service/g2/remoteEngineQuickStartSettings/save.json"

API_EV_CHARGE_NOW = "/service/g2/phevChargeNow/execute.json"

# ------------------------------------------------------------------
# Response field names
# ------------------------------------------------------------------

API_SERVICE_REQ_ID = "serviceRequestId"
API_REMOTE_SERVICE_STATE = "remoteServiceState"
API_SERVICE_STATE_SUCCESS = "SUCCESS"
API_SERVICE_STATE_FAILED = "FAILED"

API_VEHICLE_MODEL_NAME = "modelName"
API_VEHICLE_MODEL_YEAR = "modelYear"
API_VEHICLE_NAME = "nickname"
API_VEHICLE_FEATURES = "features"
API_VEHICLE_SUBSCRIPTION_FEATURES = "subscriptionFeatures"
API_VEHICLE_SUBSCRIPTION_STATUS = "subscriptionStatus"

API_ODOMETER = "odometerValue"
API_TIMESTAMP = "eventDateStr"
API_AVG_FUEL_CONSUMPTION = "avgFuelConsumptionMpg"
API_DIST_TO_EMPTY = "distanceToEmptyFuelMiles10s"
API_TIRE_PRESSURE_FL = "tirePressureFrontLeftPsi"
API_TIRE_PRESSURE_FR = "tirePressureFrontRightPsi"
API_TIRE_PRESSURE_RL = "tirePressureRearLeftPsi"
API_TIRE_PRESSURE_RR = "tirePressureRearRightPsi"

API_DOOR_BOOT_POSITION = "doorBootPosition"
API_DOOR_ENGINE_HOOD_POSITION = "doorEngineHoodPosition"
API_DOOR_FRONT_LEFT_POSITION = "doorFrontLeftPosition"
API_DOOR_FRONT_RIGHT_POSITION = "doorFrontRightPosition"
API_DOOR_REAR_LEFT_POSITION = "doorRearLeftPosition"
API_DOOR_REAR_RIGHT_POSITION = "doorRearRightPosition"
API_WINDOW_FRONT_LEFT_STATUS = "windowFrontLeftStatus"
API_WINDOW_FRONT_RIGHT_STATUS = "windowFrontRightStatus"
API_WINDOW_REAR_LEFT_STATUS = "windowRearLeftStatus"
API_WINDOW_REAR_RIGHT_STATUS = "windowRearRightStatus"
API_WINDOW_SUNROOF_STATUS = "windowSunroofStatus"
API_EV_DISTANCE_TO_EMPTY = "evDistanceToEmpty"
API_LAST_UPDATED_DATE = "lastUpdatedTime"

API_HEALTH_TROUBLE = "isTrouble"
API_HEALTH_ONDATES = "onDates"
API_HEALTH_FEATURE = "featureCode"

# ------------------------------------------------------------------
# Vehicle features
# ------------------------------------------------------------------

API_FEATURE_PHEV = "PHEV"
API_FEATURE_REMOTE_START = "RES"
API_FEATURE_REMOTE = "REMOTE"
API_FEATURE_SAFETY = "SAFETY"
API_FEATURE_ACTIVE = "ACTIVE"
API_FEATURE_G1_TELEMATICS = "g1"
API_FEATURE_G2_TELEMATICS = "g2"
API_FEATURE_G3_TELEMATICS = "g3"
API_FEATURE_TPMS = "TPMS_MIL"
API_FEATURE_LOCK_STATUS = "DOOR_LU_STAT"
API_FEATURE_MOONROOF_LIST: frozenset[str] = frozenset(
    {
        "PANPM-DG2G",
        "PANPM-TUIRWAOC",
        "PANMRF_ES",
        "PANPM-FGTU",
        "PANPM-INTRETR",
        "PANPM-PWRSHD",
        "PANPW-RGF",
        "MOONSTAT",
    }
)
API_FEATURE_WINDOWS_LIST: frozenset[str] = frozenset({"PWAAADWWAP", "WDWSTAT"})

# ------------------------------------------------------------------
# Error codes
# ------------------------------------------------------------------

API_ERROR_SOA_403 = "403-soa-unableToParseResponseBody"
API_ERROR_INVALID_CREDENTIALS = "InvalidCredentials"
API_ERROR_INVALID_ACCOUNT = "invalidAccount"
API_ERROR_SERVICE_ALREADY_STARTED = "ServiceAlreadyStarted"
API_ERROR_VEHICLE_SETUP = "VEHICLESETUPERROR"
API_ERROR_G1_INVALID_PIN = "SXM40006"
API_ERROR_G1_SERVICE_ALREADY_STARTED = "SXM40009"
API_ERROR_G1_PIN_LOCKED = "SXM40017"

LOGIN_REJECTED_CODES: frozenset[str] = frozenset(
    {API_ERROR_INVALID_CREDENTIALS, API_ERROR_INVALID_ACCOUNT, "InvalidAccount"}
)
SOFT_FAILURE_CODES: frozenset[str] = frozenset({API_ERROR_SOA_403})
ALREADY_STARTED_CODES: frozenset[str] = frozenset(
    {API_ERROR_SERVICE_ALREADY_STARTED, API_ERROR_G1_SERVICE_ALREADY_STARTED}
)
INVALID_PIN_CODES: frozenset[str] = frozenset(
    {API_ERROR_INVALID_CREDENTIALS, API_ERROR_G1_INVALID_PIN, API_ERROR_G1_PIN_LOCKED}
)

# ------------------------------------------------------------------
# Doors
# ------------------------------------------------------------------

WHICH_DOOR = "unlockDoorType"
ALL_DOORS = "ALL_DOORS_CMD"
DRIVERS_DOOR = "FRONT_LEFT_DOOR_CMD"
TAILGATE_DOOR = "TAILGATE_DOOR_CMD"
VALID_DOORS: tuple[str, ...] = (ALL_DOORS, DRIVERS_DOOR, TAILGATE_DOOR)

# ------------------------------------------------------------------
# Sentinel values reported for unavailable data
# ------------------------------------------------------------------

BAD_AVG_FUEL_CONSUMPTION = "16383"
BAD_DISTANCE_TO_EMPTY_FUEL = "16383"
BAD_TIRE_PRESSURE = "32767"
BAD_LONGITUDE = 180.0
BAD_LATITUDE = 90.0

PIN_LENGTH = 4
AUTH_CODE_LENGTH = 6
