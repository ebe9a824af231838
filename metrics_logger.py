import math

import pandas as pd

from chain_simulation import HISTORY_FIELDS, ROLE_ORDER


class MetricsLogger:

    def __init__(self, records=None):
        self.columns = list(HISTORY_FIELDS)
        self.records = []
        if records:
            self.add_records(records)

    @classmethod
    def from_simulation(cls, simulation):
        return cls(simulation.history)

    def add_records(self, records):
        self.records.extend(records)

    def to_dataframe(self):
        rows = [{col: getattr(r, col) for col in self.columns} for r in self.records]
        return pd.DataFrame(rows, columns=self.columns)

    def to_csv(self, path):
        df = self.to_dataframe()
        df.to_csv(path, index=False)

    def _role_index(self):
        return [role.value for role in ROLE_ORDER]

    def order_variance(self):
        """
        Variance of the orders each stage placed over the run, in chain order
        (Retailer first). Rising values upstream are the bullwhip effect.
        """
        df = self.to_dataframe()
        variance = df.groupby('role')['order_placed'].var()
        return variance.reindex(self._role_index())

    def bullwhip_ratios(self, customer_demand):
        """
        Order variance of each stage divided by the variance of end-customer demand.
        Returns NaN for every stage when customer demand never varies.
        """
        demand_variance = pd.Series(customer_demand, dtype=float).var()
        variance = self.order_variance()
        if not demand_variance or math.isnan(demand_variance):
            return pd.Series(float('nan'), index=variance.index)
        return variance / demand_variance

    def cost_summary(self):
        """Total cost per stage in chain order, plus a 'Total' row."""
        df = self.to_dataframe()
        costs = df.groupby('role')['cost'].sum().reindex(self._role_index(), fill_value=0.0)
        costs['Total'] = costs.sum()
        return costs

    def pivot(self, column):
        """Week-by-stage table of one history column, e.g. pivot('order_placed')."""
        df = self.to_dataframe()
        table = df.pivot(index='week', columns='role', values=column)
        return table[[r for r in self._role_index() if r in table.columns]]
