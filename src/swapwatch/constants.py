# Uniswap V3 pool: Swap(address,address,int256,int256,uint160,uint128,int24)
SWAP_T0 = "0xc42079f94a6350d7e6235f29174924f928cc2ac818eb64fed8004e115fbcca67"

SWAP_EVENT = "Swap"
WORD_SIZE = 32
ADDRESS_SIZE = 20
SHARD_SUFFIX = "decoded_swaps.json"
