from alfred.agent.services.keepalive import KeepAlivePinger
from alfred.agent.services.outbound_dispatcher import OutboundDispatcher, OutboundJob

__all__ = ["KeepAlivePinger", "OutboundDispatcher", "OutboundJob"]
