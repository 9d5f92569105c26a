"""Socket.IO event names shared by the handlers and the room service."""

# Inbound (client -> server)
CREATE_ROOM = "create-room"
JOIN_ROOM = "join-room"
LEAVE_ROOM = "leave-room"
START_GAME = "start-game"
REQUEST_ROOM_DATA = "request-room-data"

# Both directions
DRAW = "draw"
CLEAR_CANVAS = "clear-canvas"
CHAT_MESSAGE = "chat-message"

# Outbound (server -> client)
PLAYER_JOINED = "player-joined"
PLAYER_LEFT = "player-left"
GAME_STARTED = "game-started"
WORD_TO_DRAW = "word-to-draw"
TIME_UPDATE = "time-update"
CORRECT_GUESS = "correct-guess"
ROUND_END = "round-end"
NEW_ROUND = "new-round"
GAME_END = "game-end"
ROOM_DATA = "room-data"
