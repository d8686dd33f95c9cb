from alfred.agent.actions.command_encoder import CommandTopics, encode
from alfred.agent.actions.reply_router import ReplyRouter, TelemetryPayloadError

__all__ = [
    "CommandTopics",
    "ReplyRouter",
    "TelemetryPayloadError",
    "encode",
]
