"""Dynamic Interface Compiler API: stores and generates declarative UI schemas."""
