"""WhatsApp tarot reader: dialogue core and webhook host."""
