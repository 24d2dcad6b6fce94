# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/mesonode/roles/state_machine.py
from __future__ import annotations

from typing import List, Tuple

from .models import (
    Action,
    ConfigTarget,
    ConfigureAction,
    PlanContext,
    RoleSet,
    Service,
    ServiceAction,
    ServiceState,
)


def _master_actions(ctx: PlanContext, *, also_agent: bool) -> List[Action]:
    # zoo.cfg is rewritten for every topology; an empty one drops all server.N lines
    actions: List[Action] = [
        ConfigureAction(ConfigTarget.ENSEMBLE_PEERS),
        ConfigureAction(ConfigTarget.ENSEMBLE_MYID),
        ConfigureAction(ConfigTarget.MASTER_QUORUM),
        ServiceAction(Service.ENSEMBLE, ServiceState.ENABLED_RUNNING),
    ]
    if ctx.has_hostname:
        actions += [
            ConfigureAction(ConfigTarget.MASTER_HOSTNAME),
            ConfigureAction(ConfigTarget.ORCHESTRATOR_HOSTNAME),
        ]
    if not also_agent:
        # A master-only host must not take workloads.
        actions.append(ServiceAction(Service.AGENT, ServiceState.DISABLED_STOPPED))
    actions += [
        ServiceAction(Service.MASTER, ServiceState.RESTARTED),
        ServiceAction(Service.ORCHESTRATOR, ServiceState.RESTARTED),
    ]
    return actions


def _agent_actions(ctx: PlanContext, *, also_master: bool) -> List[Action]:
    actions: List[Action] = []
    if ctx.has_hostname:
        actions.append(ConfigureAction(ConfigTarget.AGENT_HOSTNAME))
    if not also_master:
        actions.append(ServiceAction(Service.MASTER, ServiceState.DISABLED_STOPPED))
        if ctx.ensemble_bundled:
            actions.append(ServiceAction(Service.ENSEMBLE, ServiceState.DISABLED_STOPPED))
    actions.append(ServiceAction(Service.AGENT, ServiceState.RESTARTED))
    return actions


def plan_actions(roles: RoleSet, ctx: PlanContext) -> Tuple[Action, ...]:
    """
    Compute the ordered configure/service actions for one run.

    master:        ensemble peers, myid and quorum, start ensemble, master/marathon
                   hostnames, disable agent, restart master and marathon
    agent:         agent hostname, disable master (and the bundled
                   ensemble), restart agent
    master+agent:  both paths without the cross-role disables

    Package installation is not part of the plan; the driver installs
    before applying any of it.
    """
    actions: List[Action] = [ConfigureAction(ConfigTarget.CONNECTION_STRING)]
    if roles.master:
        actions += _master_actions(ctx, also_agent=roles.agent)
    if roles.agent:
        actions += _agent_actions(ctx, also_master=roles.master)
    return tuple(actions)


def service_actions(actions) -> List[ServiceAction]:
    return [a for a in actions if isinstance(a, ServiceAction)]
