"""Infrastructure layer: persistence, delivery queue, channel senders, scheduler."""
