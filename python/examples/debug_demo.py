import time
from tradelog import DebugLevel, DebugOptions, TradingError, init_logger

def main():
    log = init_logger("order-router", "oms", "DEBUG", distribution="tradelog")
    log.info("router started", venue="alpaca", workers=4)
    log.verbose("warming caches")

    for level in (DebugLevel.STACK, DebugLevel.MEM, DebugLevel.GC, DebugLevel.BUILD):
        log.debug("checkpoint", DebugOptions(enabled=True, level=level), phase=level.value)
        time.sleep(0.1)

    log.debug("bad option", DebugOptions(enabled=True, level="VERBOSE"))

    try:
        raise ConnectionError("venue unreachable")
    except ConnectionError as exc:
        log.error(TradingError("order rejected", "OMS-503", "symbol=AAPL qty=10", exc),
                  latency=0.25)

if __name__ == "__main__":
    main()
