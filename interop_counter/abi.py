"""
Contract ABIs used by the dashboard
"""

CROSS_CHAIN_COUNTER_ABI = [
    {
        "type": "function",
        "name": "number",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "lastIncrementer",
        "inputs": [],
        "outputs": [
            {"name": "chainId", "type": "uint256"},
            {"name": "sender", "type": "address"},
        ],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "increment",
        "inputs": [],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "event",
        "name": "CounterIncremented",
        "inputs": [
            {"name": "senderChainId", "type": "uint256", "indexed": False},
            {"name": "sender", "type": "address", "indexed": False},
            {"name": "newValue", "type": "uint256", "indexed": False},
        ],
        "anonymous": False,
    },
]

CROSS_CHAIN_COUNTER_INCREMENTER_ABI = [
    {
        "type": "function",
        "name": "increment",
        "inputs": [
            {"name": "counterChainId", "type": "uint256"},
            {"name": "counterAddress", "type": "address"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]

L2_TO_L2_CROSS_DOMAIN_MESSENGER_ABI = [
    {
        "type": "function",
        "name": "sendMessage",
        "inputs": [
            {"name": "_destination", "type": "uint256"},
            {"name": "_target", "type": "address"},
            {"name": "_message", "type": "bytes"},
        ],
        "outputs": [{"name": "", "type": "bytes32"}],
        "stateMutability": "nonpayable",
    },
]

COUNTER_INCREMENTED_EVENT = "CounterIncremented"
