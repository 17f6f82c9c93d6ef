#!/usr/bin/env python

import argparse

import numpy as np
import scipy.optimize

from posegen.collision import Capsule
from posegen.collision import HalfSpace
from posegen.collision import Sphere
from posegen.constraints import as_nonlinear_constraint
from posegen.constraints import EnvCollision
from posegen.constraints import EnvCollisionConstraint
from posegen.constraints import SelfCollision
from posegen.constraints import SelfCollisionConstraint
from posegen.data import PostureData
from posegen.model import BodyJacobian
from posegen.model.samples import branched_arm


parser = argparse.ArgumentParser(
    formatter_class=argparse.ArgumentDefaultsHelpFormatter,
)
parser.add_argument(
    '--margin', type=float, default=0.05,
    help='minimal distance between hulls.')
parser.add_argument(
    '--squared', action='store_true',
    help='constrain the signed squared distances.')
args = parser.parse_args()

mb = branched_arm()
data = PostureData(mb, [0.0, 0.0, -9.81])

hand = Sphere.from_center_and_radius([0, 0, 0], 0.1)
forearm = Capsule.from_endpoints([0, 0, 0], [0, 0, 0.3], 0.05)
hand_pose = np.eye(4)
hand_pose[:3, 3] = [0, 0, 0.4]

# keep the left hand above a table and away from the right arm
env_constr = EnvCollisionConstraint(
    data, [EnvCollision('left', hand_pose, hand,
                        HalfSpace.ground_plane(0.6))],
    squared=args.squared)
self_constr = SelfCollisionConstraint(
    data, [SelfCollision('left', hand_pose, hand,
                         'right', np.eye(4), forearm)],
    squared=args.squared)
margin = args.margin ** 2 if args.squared else args.margin

# reach a target with the left hand, the target is below the table
target = np.array([0.2, -0.1, 0.5])
hand_jac = BodyJacobian(mb, 'left', point=[0, 0, 0.4])


def objective(x):
    data.set_x(x)
    X_0_b = data.fk.body_pos_w[hand_jac.body_index]
    diff = X_0_b[:3, :3].dot(hand_jac.point()) + X_0_b[:3, 3] - target
    grad = np.zeros(len(x))
    grad[hand_jac.param_indices] = 2 * diff.dot(
        hand_jac.jacobian(mb, data.fk)[3:])
    return diff.dot(diff), grad


result = scipy.optimize.minimize(
    objective, np.zeros(data.pb_size), jac=True, method='trust-constr',
    constraints=[as_nonlinear_constraint(env_constr, lb=margin),
                 as_nonlinear_constraint(self_constr, lb=margin)])

print('status: {}'.format(result.message))
print('parameters: {}'.format(result.x))
print('table distance: {}'.format(env_constr.compute(result.x)))
print('arm distance: {}'.format(self_constr.compute(result.x)))
print('torques: {}'.format(
    [list(tau) for tau in data.inverse_dynamics().torque]))
