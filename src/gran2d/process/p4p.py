'''
Plain-text particle trajectory format (.p4p), one block per saved frame:

    TIMESTEP  PARTICLES
    <time> <n>
    ID  RAD  MASS  PX  PY  VX  VY
    <n rows>
'''
from dataclasses import dataclass
from typing import List

import numpy as np

HEADER = "ID  RAD  MASS  PX  PY  VX  VY"


@dataclass
class P4PFrame:
    time: float
    ids: np.ndarray         # (n,) int
    radius: np.ndarray      # (n,)
    mass: np.ndarray        # (n,)
    position: np.ndarray    # (n, 2)
    velocity: np.ndarray    # (n, 2)

    @property
    def num_particles(self) -> int:
        return self.ids.shape[0]


def write_frame(p4pfile, t: float, ids, radius, mass, position, velocity, precision: int = 6):
    '''
    Append one frame to an open text file.
    usage:
        with open('output.p4p', encoding="UTF-8", mode='w') as p4p:
            write_frame(p4p, t, ids, radius, mass, position, velocity)
    '''
    ids = np.asarray(ids)
    position = np.asarray(position, dtype=np.float64).reshape(-1, 2)
    velocity = np.asarray(velocity, dtype=np.float64).reshape(-1, 2)
    n = ids.shape[0]

    p4pfile.write("TIMESTEP  PARTICLES\n")
    p4pfile.write(f"{t} {n}\n")
    p4pfile.write(HEADER + "\n")

    if n > 0:
        data = np.column_stack([
            ids, radius, mass,
            position[:, 0], position[:, 1],
            velocity[:, 0], velocity[:, 1]
        ])
        e = f"%.{precision}e"
        np.savetxt(p4pfile, data, fmt=' '.join(['%d'] + [e] * 6))


def read_frames(file_name: str) -> List[P4PFrame]:
    '''
    Read every frame of a .p4p file.
    '''
    frames = []
    with open(file_name, encoding="UTF-8") as fp:
        lines = fp.readlines()

    i = 0
    while i < len(lines):
        parts = lines[i].split()
        if len(parts) >= 2 and parts[0] == 'TIMESTEP' and parts[1] == 'PARTICLES':
            time_line = lines[i + 1].split()
            t = float(time_line[0])
            n = int(time_line[1])
            i += 3  # skip the column header
            if i + n > len(lines):
                raise ValueError(f"{file_name}: frame at time {t} is truncated")

            rows = np.zeros((n, 7), dtype=np.float64)
            for k in range(n):
                tokens = lines[i + k].split()
                if len(tokens) < 7:
                    raise ValueError(f"{file_name}:{i + k + 1}: expected 7 columns, got {len(tokens)}")
                rows[k] = [float(tok) for tok in tokens[:7]]
            i += n

            frames.append(P4PFrame(
                time=t,
                ids=rows[:, 0].astype(int),
                radius=rows[:, 1].copy(),
                mass=rows[:, 2].copy(),
                position=rows[:, 3:5].copy(),
                velocity=rows[:, 5:7].copy(),
            ))
        else:
            i += 1

    return frames
