MESSAGE_MAX_LENGTH = 1000

PAIR_KEY_SEPARATOR = ":"
