from salon_booking.agents.assistant import BookingAssistant, build_request_messages, get_reply

__all__ = ["BookingAssistant", "build_request_messages", "get_reply"]
