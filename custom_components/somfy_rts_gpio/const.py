DOMAIN = "somfy_rts_gpio"

CONF_NAME = "name"
CONF_PIN_UP = "pin_up"
CONF_PIN_DOWN = "pin_down"
CONF_PIN_MY_POSITION = "pin_my_position"
CONF_MOVEMENT_DURATION = "movement_duration"
CONF_BUTTON_PRESS_DURATION = "button_press_duration"
CONF_DEFAULT_POSITION = "default_position"
CONF_ACTIVE_LOW = "active_low"
CONF_SIMULATE = "simulate"

DEFAULT_NAME = "Somfy Curtain"
DEFAULT_MOVEMENT_DURATION = 8        # seconds for a full 0 <-> 100 traverse
DEFAULT_BUTTON_PRESS_DURATION = 500  # ms the remote button is held
DEFAULT_POSITION_UP = "up"
DEFAULT_POSITION_DOWN = "down"

PLATFORMS = ["cover"]

SERVICE_MY_POSITION = "my_position"

# Position model
POSITION_MIN = 0
POSITION_MAX = 100
POSITION_STEP = 10
MY_POSITION = 10     # target that maps to the remote's "my" preset

MANUFACTURER = "Somfy"
MODEL = "Telis 1 RTS"
