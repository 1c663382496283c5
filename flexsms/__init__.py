"""Bridge inbound SMS numbers to Twilio Flex task-backed chat channels."""
