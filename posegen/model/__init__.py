"""Articulated rigid-body model.

This module provides:
- Mechanism description (bodies connected by joints)
- Forward kinematics and body Jacobians
- Static inverse dynamics

Forward kinematics and inverse dynamics support both NumPy and JAX
backends.
"""

from posegen.model.dynamics import inverse_dynamics
from posegen.model.dynamics import InverseDynamics
from posegen.model.kinematics import BodyJacobian
from posegen.model.kinematics import forward_kinematics
from posegen.model.kinematics import ForwardKinematics
from posegen.model.mechanism import Body
from posegen.model.mechanism import Joint
from posegen.model.mechanism import Mechanism
from posegen.model.mechanism import UnknownBodyError


__all__ = [
    'Body',
    'Joint',
    'Mechanism',
    'UnknownBodyError',
    'forward_kinematics',
    'ForwardKinematics',
    'BodyJacobian',
    'inverse_dynamics',
    'InverseDynamics',
]
