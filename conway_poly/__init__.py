"""Conway-operator polyhedron engine."""

__all__ = ["color", "face_map", "flag", "keys", "notation", "operators", "parallel", "parameters", "pipeline", "polyhedron", "solids", "vec3"]
