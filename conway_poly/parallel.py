"""Chunked, data-parallel variant of :func:`conway_poly.operators.kis_n`.

Faces are split into fixed-size chunks. Every chunk is resolved by its own
:class:`~conway_poly.flag.Flag` with chunk-local vertex indices, so workers
share no mutable state. A sequential merge then appends the chunks in
chunk-index order, shifting each chunk's face indices by the number of
vertices emitted by the chunks before it.

Vertices shared by faces in different chunks are emitted once per chunk;
only the single-chunk case reproduces ``kis_n`` exactly.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, List, Sequence

from . import vec3 as vec
from .flag import Flag, FlagResult
from .keys import key1, key2, tag
from .polyhedron import Face, Polyhedron
from .vec3 import Vector3

__all__ = ["DEFAULT_CHUNK_SIZE", "ChunkResult", "kis_n_chunked", "merge_chunks"]

log = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 2048

_KIS_APEX = tag("k")


@dataclass(slots=True)
class ChunkResult:
    index: int
    result: FlagResult


def _kis_chunk(
    index: int,
    offset: int,
    faces: Sequence[Face],
    vertices: Sequence[Vector3],
    normals: Sequence[Vector3],
    centers: Sequence[Vector3],
    n: int,
    apex_dist: float,
) -> ChunkResult:
    flag = Flag()
    for local, face in enumerate(faces):
        nface = offset + local
        apex = key2(_KIS_APEX, nface)
        matches = n == 0 or len(face) == n
        if matches:
            flag.add_vertex(apex, vec.add(centers[nface], vec.scale(normals[nface], apex_dist)))
        v1 = face[-1]
        for v2 in face:
            flag.add_vertex(key1(v2), vertices[v2])
            if matches:
                flag.add_face([key1(v1), key1(v2), apex])
            else:
                flag.add_face_map(key1(nface), key1(v1), key1(v2))
            v1 = v2
    result = flag.to_poly()
    log.debug(
        "kis chunk %d: %d faces -> %d faces, %d vertices",
        index,
        len(faces),
        len(result.faces),
        len(result.vertices),
    )
    return ChunkResult(index=index, result=result)


def merge_chunks(name: str, chunks: Sequence[ChunkResult]) -> Polyhedron:
    """Concatenate chunk results in chunk-index order with running vertex offsets."""
    vertices: List[Vector3] = []
    faces: List[List[int]] = []
    warnings = []
    for chunk in sorted(chunks, key=lambda c: c.index):
        offset = len(vertices)
        vertices.extend(chunk.result.vertices)
        faces.extend([i + offset for i in face] for face in chunk.result.faces)
        warnings.extend(chunk.result.warnings)
    return Polyhedron(name=name, vertices=vertices, faces=faces, warnings=warnings)


def kis_n_chunked(
    poly: Polyhedron,
    n: int = 0,
    apex_dist: float = 0.1,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    max_workers: int | None = None,
    executor: Executor | None = None,
) -> Polyhedron:
    """Parallel ``kis_n``; pass ``executor`` to reuse an existing pool."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")

    normals = poly.calc_normals()
    centers = poly.calc_centers()
    starts = range(0, len(poly.faces), chunk_size)

    owned = executor is None
    pool = ThreadPoolExecutor(max_workers=max_workers) if owned else executor
    try:
        futures = [
            pool.submit(
                _kis_chunk,
                index,
                start,
                poly.faces[start : start + chunk_size],
                poly.vertices,
                normals,
                centers,
                n,
                apex_dist,
            )
            for index, start in enumerate(starts)
        ]
        done: Dict[int, ChunkResult] = {}
        for future in as_completed(futures):
            chunk = future.result()
            done[chunk.index] = chunk
    finally:
        if owned:
            pool.shutdown()

    name = f"k{n if n else ''}{poly.name}"
    merged = merge_chunks(name, list(done.values()))
    log.info(
        "kis (chunked): %d chunks of <= %d faces -> %s",
        len(done),
        chunk_size,
        merged.summary(),
    )
    return merged
