# Four-Stage Supply Chain Simulation (Beer Distribution Game)
# Retailer -> Wholesaler -> Distributor -> Manufacturer, stepped in lock-step weeks.

import logging
from dataclasses import dataclass, fields
from enum import Enum

from config import ConfigurationError
from delay_pipeline import DelayPipeline
from order_policies import EMPTY_CONTEXT, OrderContext, OrderPolicy

logger = logging.getLogger(__name__)


class StageRole(Enum):
    RETAILER = "Retailer"
    WHOLESALER = "Wholesaler"
    DISTRIBUTOR = "Distributor"
    MANUFACTURER = "Manufacturer"


# Customer-facing stage first
ROLE_ORDER = [StageRole.RETAILER, StageRole.WHOLESALER, StageRole.DISTRIBUTOR, StageRole.MANUFACTURER]


@dataclass
class HistoryRecord:
    week:              int
    role:              str
    inventory:         int
    backlog:           int
    order_placed:      int
    incoming_demand:   int
    shipment_sent:     int
    shipment_received: int
    cost:              float


HISTORY_FIELDS = [f.name for f in fields(HistoryRecord)]


class SupplyChainAgent:
    def __init__(self, role, initial_inventory, policy, holding_cost=0.5, backlog_cost=1.0):
        self.role = role
        self.inventory = initial_inventory
        self.backlog = 0
        self.supply_line = 0  # ordered upstream, not yet received
        self.holding_cost = holding_cost
        self.backlog_cost = backlog_cost
        self.policy = policy

        # Last-turn observations, for reporting and decisions only
        self.last_order_received = 0
        self.last_shipment_received = 0
        self.last_order_placed = 0
        self.last_shipment_sent = 0

    def receive_shipment(self, quantity):
        """Phase 1: goods from upstream land in inventory and leave the supply line."""
        self.inventory += quantity
        self.last_shipment_received = quantity
        self.supply_line = max(0, self.supply_line - quantity)

    def process_order(self, incoming_order):
        """
        Phase 2: fill the new order plus any backlog from inventory.
        Old backlog and new demand are one obligation; whatever cannot be
        shipped becomes the new backlog. Returns the quantity shipped.
        """
        self.last_order_received = incoming_order
        total_demand = incoming_order + self.backlog

        if self.inventory >= total_demand:
            shipped = total_demand
            self.inventory -= total_demand
            self.backlog = 0
        else:
            shipped = self.inventory
            self.backlog = total_demand - self.inventory
            self.inventory = 0

        self.last_shipment_sent = shipped
        return shipped

    def make_decision(self, context=None):
        """Phase 3: ask the policy for an order using post-fulfillment state."""
        order = self.policy.calculate_order(
            self.inventory,
            self.backlog,
            self.last_order_received,
            self.supply_line,
            context or EMPTY_CONTEXT,
        )
        order = max(0, int(order))
        self.supply_line += order
        self.last_order_placed = order
        return order

    def current_cost(self):
        return self.holding_cost * self.inventory + self.backlog_cost * self.backlog

    def __repr__(self):
        return (f"SupplyChainAgent({self.role.value}, inventory={self.inventory}, "
                f"backlog={self.backlog}, supply_line={self.supply_line}, policy={self.policy!r})")


class ChainSimulation:
    def __init__(self, config, demand_schedule, policies):
        policies = list(policies)
        if len(policies) != len(ROLE_ORDER):
            raise ConfigurationError(f"Must provide exactly {len(ROLE_ORDER)} policies, got {len(policies)}")
        if len({id(p) for p in policies}) != len(policies):
            raise ConfigurationError("Each agent needs its own policy instance; policies cannot be shared")
        for policy in policies:
            if not isinstance(policy, OrderPolicy):
                raise ConfigurationError(f"{policy!r} does not implement OrderPolicy")

        demand_schedule = [int(d) for d in demand_schedule]
        if any(d < 0 for d in demand_schedule):
            raise ConfigurationError("Demand schedule cannot contain negative values")

        self.config = config
        self.demand_schedule = demand_schedule
        self.agents = [
            SupplyChainAgent(role, config.initial_inventory, policy,
                             holding_cost=config.holding_cost, backlog_cost=config.backlog_cost)
            for role, policy in zip(ROLE_ORDER, policies)
        ]

        # Index i connects agent i and agent i+1.
        # Orders flow upstream (R->W, W->D, D->M); shipments flow downstream (W->R, D->W, M->D).
        self.order_pipelines = [DelayPipeline(config.order_delay) for _ in range(len(ROLE_ORDER) - 1)]
        self.shipment_pipelines = [DelayPipeline(config.shipment_delay) for _ in range(len(ROLE_ORDER) - 1)]
        # Manufacturer has no supplier; its orders go into production
        self.production_pipeline = DelayPipeline(config.production_delay)

        self.current_week = 1
        self.history = []
        self.last_customer_demand = 0

        logger.info(
            "Simulation created: %d weeks, delays order=%d shipment=%d production=%d, policies=%s",
            config.max_weeks, config.order_delay, config.shipment_delay, config.production_delay,
            [repr(p) for p in policies],
        )

    def agent(self, role):
        return self.agents[ROLE_ORDER.index(role)]

    def customer_demand_for(self, week):
        # Weeks past the end of the schedule have no demand
        if 1 <= week <= len(self.demand_schedule):
            return self.demand_schedule[week - 1]
        return 0

    def is_finished(self):
        return self.current_week > self.config.max_weeks

    def run(self):
        while not self.is_finished():
            self.step()
        logger.info("Simulation finished after %d weeks, total cost %.2f",
                    self.config.max_weeks, self.total_supply_chain_cost())
        return self.history

    def step(self):
        """
        Advance every agent through one week. Each phase completes for all
        four agents before the next starts, so no agent decides before every
        arrival is in.
        Returns the history records appended for this week.
        """
        week = self.current_week
        retailer = self.agents[0]

        # 1. Arrivals: entries pushed 'delay' weeks ago
        customer_demand = self.customer_demand_for(week)
        self.last_customer_demand = customer_demand
        incoming_orders = [customer_demand] + [p.pop_arrival() for p in self.order_pipelines]
        arrivals = [p.pop_arrival() for p in self.shipment_pipelines] + [self.production_pipeline.pop_arrival()]

        # 2. Receive goods
        for agent, quantity in zip(self.agents, arrivals):
            agent.receive_shipment(quantity)

        # 3. Fulfill: retailer serves the customer, others serve their downstream neighbour
        shipped = [agent.process_order(order) for agent, order in zip(self.agents, incoming_orders)]

        # 4. Decide
        orders = [agent.make_decision(self._build_context(i, customer_demand))
                  for i, agent in enumerate(self.agents)]

        # 5. Departures
        for i, pipeline in enumerate(self.order_pipelines):
            pipeline.push_departure(orders[i])
        self.production_pipeline.push_departure(orders[-1])
        # Retailer's shipment goes to the customer, not into a pipeline
        for i, pipeline in enumerate(self.shipment_pipelines):
            pipeline.push_departure(shipped[i + 1])

        logger.debug("Week %d: demand=%d orders=%s shipped=%s", week, customer_demand, orders, shipped)
        if week % 5 == 0:
            logger.info("Week %d: Retailer inv=%d backlog=%d cost=%.2f",
                        week, retailer.inventory, retailer.backlog, retailer.current_cost())

        # 6. Record and advance
        records = self._record_history(week)
        self.current_week += 1
        return records

    def _build_context(self, index, customer_demand):
        if not self.config.information_sharing:
            return EMPTY_CONTEXT
        if index == 0:
            return OrderContext(actual_customer_demand=customer_demand)
        downstream = self.agents[index - 1]
        return OrderContext(
            downstream_inventory=downstream.inventory,
            downstream_backlog=downstream.backlog,
            actual_customer_demand=customer_demand,
        )

    def _record_history(self, week):
        records = [
            HistoryRecord(
                week=week,
                role=agent.role.value,
                inventory=agent.inventory,
                backlog=agent.backlog,
                order_placed=agent.last_order_placed,
                incoming_demand=agent.last_order_received,
                shipment_sent=agent.last_shipment_sent,
                shipment_received=agent.last_shipment_received,
                cost=agent.current_cost(),
            )
            for agent in self.agents
        ]
        self.history.extend(records)
        return records

    # -----------------------------
    # Cost queries (computed from history only)
    # -----------------------------
    def total_cost_for_agent(self, agent):
        """Total cost of one stage, given as a StageRole or an index into the chain."""
        role = agent if isinstance(agent, StageRole) else ROLE_ORDER[agent]
        return sum(r.cost for r in self.history if r.role == role.value)

    def total_supply_chain_cost(self):
        return sum(r.cost for r in self.history)

    def cost_breakdown(self):
        return [(role.value, self.total_cost_for_agent(role)) for role in ROLE_ORDER]
