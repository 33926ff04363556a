"""
Tests package for the stateless accumulator

- Unit tests: individual components in isolation
- Integration tests: complete rounds and component interactions
"""
