from sqlalchemy import Column, Integer, BigInteger, Date, DateTime, ForeignKey, UniqueConstraint

from twstock.database import Base
from twstock.models.trading import _BigId


class MarginTrading(Base):
    """融資融券模型 (單位: 股)"""

    __tablename__ = "margin_trading"
    __table_args__ = (
        UniqueConstraint("stock_id", "trade_date", name="uq_margin_stock_date"),
    )

    id = Column(_BigId, primary_key=True, index=True)
    stock_id = Column(Integer, ForeignKey("stocks.id", ondelete="CASCADE"), nullable=False, index=True)
    trade_date = Column(Date, nullable=False, index=True)

    # 融資
    margin_buy = Column(BigInteger, nullable=False)
    margin_sell = Column(BigInteger, nullable=False)
    margin_balance = Column(BigInteger, nullable=False)
    margin_change = Column(BigInteger, nullable=False)

    # 融券
    short_sell = Column(BigInteger, nullable=False)
    short_cover = Column(BigInteger, nullable=False)
    short_balance = Column(BigInteger, nullable=False)
    short_change = Column(BigInteger, nullable=False)

    margin_quota = Column(BigInteger)
    short_quota = Column(BigInteger)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<MarginTrading(stock_id={self.stock_id}, date={self.trade_date}, margin_balance={self.margin_balance})>"
