"""Grid primitives and the placement, carving, cleanup and labelling passes."""
