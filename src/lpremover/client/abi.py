"""Minimal contract ABIs for V2 routers, factories, pairs and ERC-20 tokens."""


def _fn(name, inputs=(), outputs=(), mutability="view"):
    return {
        "type": "function",
        "name": name,
        "stateMutability": mutability,
        "inputs": [{"name": n, "type": t} for n, t in inputs],
        "outputs": [{"name": n, "type": t} for n, t in outputs],
    }


ERC20_ABI = [
    _fn("symbol", outputs=[("", "string")]),
    _fn("decimals", outputs=[("", "uint8")]),
    _fn("totalSupply", outputs=[("", "uint256")]),
    _fn("balanceOf", inputs=[("owner", "address")], outputs=[("", "uint256")]),
    _fn(
        "allowance",
        inputs=[("owner", "address"), ("spender", "address")],
        outputs=[("", "uint256")],
    ),
    _fn(
        "approve",
        inputs=[("spender", "address"), ("value", "uint256")],
        outputs=[("", "bool")],
        mutability="nonpayable",
    ),
]

PAIR_ABI = ERC20_ABI + [
    _fn("token0", outputs=[("", "address")]),
    _fn("token1", outputs=[("", "address")]),
    _fn("kLast", outputs=[("", "uint256")]),
    _fn(
        "getReserves",
        outputs=[
            ("reserve0", "uint112"),
            ("reserve1", "uint112"),
            ("blockTimestampLast", "uint32"),
        ],
    ),
]

FACTORY_ABI = [
    _fn("feeTo", outputs=[("", "address")]),
    _fn(
        "getPair",
        inputs=[("tokenA", "address"), ("tokenB", "address")],
        outputs=[("pair", "address")],
    ),
]

ROUTER_ABI = [
    _fn("WETH", outputs=[("", "address")], mutability="pure"),
    _fn("factory", outputs=[("", "address")], mutability="pure"),
    _fn(
        "removeLiquidity",
        inputs=[
            ("tokenA", "address"),
            ("tokenB", "address"),
            ("liquidity", "uint256"),
            ("amountAMin", "uint256"),
            ("amountBMin", "uint256"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        outputs=[("amountA", "uint256"), ("amountB", "uint256")],
        mutability="nonpayable",
    ),
    _fn(
        "removeLiquidityETH",
        inputs=[
            ("token", "address"),
            ("liquidity", "uint256"),
            ("amountTokenMin", "uint256"),
            ("amountETHMin", "uint256"),
            ("to", "address"),
            ("deadline", "uint256"),
        ],
        outputs=[("amountToken", "uint256"), ("amountETH", "uint256")],
        mutability="nonpayable",
    ),
]
