# Streamlit app for step-by-step beer game visualization
# Run with: streamlit run streamlit_app.py

import streamlit as st
import matplotlib.pyplot as plt

import demand
from chain_simulation import ChainSimulation, ROLE_ORDER
from config import SimulationConfig
from metrics_logger import MetricsLogger
from order_policies import build_policy

POLICY_CHOICES = {
    'Base Stock (15)': ('base_stock', {'target_stock': 15}),
    'Naive': ('naive', {}),
    'Sterman (15)': ('sterman', {'target_inventory': 15}),
    'Smoothing (gamma 0.3)': ('smoothing', {'initial_demand': 4, 'gamma': 0.3, 'target_stock': 15}),
    'VMI (15)': ('vmi', {'target_stock': 15}),
    'Random (0-15)': ('random', {'min_order': 0, 'max_order': 15}),
}
DEFAULT_CHOICES = ['Base Stock (15)', 'Naive', 'Naive', 'Naive']


def new_simulation(choices, pattern, weeks, share):
    config = SimulationConfig(max_weeks=weeks, information_sharing=share)
    if pattern == 'Constant (4)':
        schedule = demand.generate_constant_demand(weeks, 4)
    else:
        schedule = demand.generate_classic_beer_game_demand(weeks)
    policies = [build_policy(POLICY_CHOICES[c][0], **POLICY_CHOICES[c][1]) for c in choices]
    return ChainSimulation(config, schedule, policies)


# --- Sidebar: wiring ---
st.sidebar.header('Setup')
choices = [
    st.sidebar.selectbox(role.value, list(POLICY_CHOICES), index=list(POLICY_CHOICES).index(DEFAULT_CHOICES[i]))
    for i, role in enumerate(ROLE_ORDER)
]
pattern = st.sidebar.selectbox('Customer demand', ['Step 4 -> 8', 'Constant (4)'])
weeks = st.sidebar.number_input('Weeks', min_value=1, max_value=100, value=25)
share = st.sidebar.checkbox('Share downstream inventory (VMI visibility)', value=False)

# --- Streamlit App State Management ---
if 'sim' not in st.session_state:
    st.session_state.sim = new_simulation(choices, pattern, int(weeks), share)

sim = st.session_state.sim

st.title('Beer Distribution Game (Step-by-Step)')

# Controls
col1, col2, col3 = st.columns(3)
with col1:
    if st.button('Next Step'):
        if not sim.is_finished():
            sim.step()
with col2:
    if st.button('Run to End'):
        sim.run()
with col3:
    if st.button('Reset Simulation'):
        st.session_state.sim = sim = new_simulation(choices, pattern, int(weeks), share)

completed = sim.current_week - 1
st.header(f'Week: {completed} / {sim.config.max_weeks}')
st.write(f"Customer demand this week: {sim.last_customer_demand}")

# Stage state
st.subheader('Stages')
st.table([
    {
        'Stage': agent.role.value,
        'Policy': repr(agent.policy),
        'Inventory': agent.inventory,
        'Backlog': agent.backlog,
        'Supply Line': agent.supply_line,
        'Order Placed': agent.last_order_placed,
        'Shipment Sent': agent.last_shipment_sent,
        'Cost': agent.current_cost(),
    }
    for agent in sim.agents
])

# Pipelines
st.subheader('In Transit (next arrival first)')
links = [f'{ROLE_ORDER[i].value} / {ROLE_ORDER[i + 1].value}' for i in range(len(ROLE_ORDER) - 1)]
rows = [
    {'Link': link, 'Orders': sim.order_pipelines[i].contents(), 'Shipments': sim.shipment_pipelines[i].contents()}
    for i, link in enumerate(links)
]
rows.append({'Link': 'Production', 'Orders': [], 'Shipments': sim.production_pipeline.contents()})
st.table(rows)

if sim.history:
    metrics = MetricsLogger.from_simulation(sim)

    # --- Orders over time: the bullwhip ---
    st.subheader('Orders Placed Over Time')
    orders = metrics.pivot('order_placed')
    fig_o, ax_o = plt.subplots()
    for role in orders.columns:
        ax_o.plot(orders.index, orders[role], label=role)
    ax_o.plot(orders.index, sim.demand_schedule[:len(orders.index)], label='Customer', color='black', linestyle='--')
    ax_o.set_xlabel('Week')
    ax_o.set_ylabel('Order Quantity')
    ax_o.legend()
    st.pyplot(fig_o)

    st.subheader('Net Inventory Over Time')
    net = metrics.pivot('inventory') - metrics.pivot('backlog')
    fig_i, ax_i = plt.subplots()
    for role in net.columns:
        ax_i.plot(net.index, net[role], label=role)
    ax_i.axhline(0, color='grey', linewidth=0.8)
    ax_i.set_xlabel('Week')
    ax_i.set_ylabel('Inventory - Backlog')
    ax_i.legend()
    st.pyplot(fig_i)

    st.subheader('Cost Breakdown')
    st.table([{'Stage': stage, 'Cost': round(cost, 2)} for stage, cost in metrics.cost_summary().items()])
else:
    st.info('No weeks simulated yet.')

# Simulation End
if sim.is_finished():
    st.warning('Simulation finished. Press Reset to start again.')
